"""FireGuard API v1"""
