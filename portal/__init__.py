"""Referral management portal application.

This package holds the access-control core (permission table, route map,
page guard), the models and the JSON/page views of the national referral
dashboard.
"""
