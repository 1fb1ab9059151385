"""clubdesk — staff/admin client for the club management platform.

The library side of the staff portal: session identity, an authenticated
API client, a shared query cache kept fresh by realtime change events,
and the approval workflows staff run every shift (buy-ins, cash-outs,
credit, KYC onboarding, tournaments).
"""

__version__ = "0.1.0"
