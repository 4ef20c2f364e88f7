"""emp-hr package.

Feature modules (attendance, leaves, notifications, ...) each carry a domain
model, a repository protocol with its MySQL implementation, a service layer and
a thin Flask controller.
"""
