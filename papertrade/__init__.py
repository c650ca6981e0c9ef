"""
PaperTrade: trading-simulation REST API.

Application package root. A modular monolith using hexagonal
architecture (ports & adapters).

Bounded contexts:
    - accounts: Users, authentication, KYC, notifications, audit trail.
    - trading: Products, buy/sell ledger, portfolio, watchlist, orders, alerts.

Layers:
    - domain: Entities, ports (ABCs), pure business rules, errors.
    - application: Use cases, DTOs, orchestration.
    - infrastructure: Adapters (SQL, Redis, bcrypt, JWT) implementing domain ports.
    - interfaces: FastAPI routers, Pydantic schemas, dependency wiring.
    - shared: Cross-cutting concerns (errors, security, logging).
"""
