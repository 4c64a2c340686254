"""Self check-in system package.

Organized by feature modules (sessions, policies, access, eligibility, checkin)
with a thin Flask controller layer over service/repository layers. The
eligibility engine itself is read-only: it decides, the check-in service writes.
"""
