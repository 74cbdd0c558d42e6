"""FoodBridge - record layer for a food-donation coordination service.

Donors post surplus food, beneficiaries request it, and visitors leave
messages through a contact form. This package validates those records
against declarative schemas and stores them.

Architecture Overview:
- **Core Layer**: Configuration, logging, exceptions and sanitization
- **Domain Layer**: Record kinds, field rules and the validation engine
- **Infrastructure Layer**: Async SQLAlchemy persistence and the record store
"""
