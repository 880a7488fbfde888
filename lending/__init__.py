"""Equipment lending service.

Domain model for lending equipment to employees, with an application
service, repository adapters and a FastAPI surface around it.
"""
