"""
Domain services: email, storage, Paystack, one-time codes, analytics
"""
