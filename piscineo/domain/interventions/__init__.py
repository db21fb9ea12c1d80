"""Interventions domain - report records, PDF report dispatch"""

# Kept import-free: the PDF renderer imports .schemas from here
