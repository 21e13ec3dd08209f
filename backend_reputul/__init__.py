"""
Backend Reputul — reputation intelligence and feedback routing engine.

Turns a business's star ratings into a defensible reputation snapshot,
projects how many 5-star reviews are needed to reach rating milestones,
and routes each customer rating to the next screen without ever hiding
a public review platform. Modular layout: analysis engine (pure scoring),
config, database collaborators, and API server.
"""

__version__ = "0.1.0"
