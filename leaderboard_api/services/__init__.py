"""Business logic services.

Services contain all business logic and are called by routes.
Services accept their stores and executors explicitly so tests can swap them.
"""
