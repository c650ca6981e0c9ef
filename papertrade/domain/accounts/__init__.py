"""
Accounts bounded context: domain layer.

Users and their wallets, authentication ports, KYC records,
notifications and the audit trail.
"""
