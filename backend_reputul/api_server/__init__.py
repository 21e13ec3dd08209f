"""
API server — FastAPI app exposing the scoring engine and the feedback gate.

Routers:
- reputation: snapshot, goals and breakdown for a business.
- feedback_gate: customer rating submission routed to public or private feedback.
"""
