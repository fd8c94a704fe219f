"""Storefront API - products, reviews and transactional email"""
