"""
Credit Builder Payments - Plan Scheduling & Payment Webhook Service

A FastAPI-based service that creates credit-builder payment plans,
tracks their scheduled installments, and reconciles payment processor
events against the local schedule and transaction ledger.
"""

__version__ = "0.1.0"
