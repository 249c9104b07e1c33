"""Host payouts.

Hosts request withdrawals of their net earnings; platform admins settle
or reject the requests.
"""
