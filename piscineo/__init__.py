"""
Piscineo - intervention reports for pool-maintenance professionals.

Renders maintenance interventions as PDF reports and e-mails them to clients.
"""

__version__ = "1.0.0"
