"""Pytest bootstrap configuration.

Seed the Paystack credentials before any module builds `payment_settings`,
so the HTTP client and provider can be constructed without a real `.env`.
"""
import os

os.environ.setdefault("PAYSTACK__SECRET_KEY", "sk_test_secret")
os.environ.setdefault("PAYSTACK__PUBLIC_KEY", "pk_test_public")
