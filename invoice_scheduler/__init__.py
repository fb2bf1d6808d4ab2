"""
Invoice Scheduler - Source Package

The payment scheduling engine of a personal invoice tracker. Given unpaid
invoices, expected paydays and per-month risk flags, it recommends which
payday should cover each invoice.

DESIGN PRINCIPLES:
1. Same snapshot + same reference date → same schedule
2. Computing a schedule never writes anything
3. No invoice is silently dropped
4. Every run is auditable
5. Storage is injected, never global
"""

__version__ = "1.0.0"
__author__ = "Invoice Scheduler Team"
