"""Service layer package.

Modules here are imported directly (``studybuddy.services.quiz_validator`` etc.)
so that importing the package never builds an LLM client.
"""
