"""Debate lifecycle and matching engine.

Modules:
    claims        - per-user append-only claim logs
    matching      - contradiction candidates (every other user's claims)
    invitations   - pending -> accepted | rejected
    debates       - active -> ended, message exchange and finish negotiation
    scoring       - winner computation, stats and leaderboard
    notifications - inbox sink
    context       - per-user aggregate view
    users, admin  - profiles and administration
"""
