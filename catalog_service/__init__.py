"""Catalog Service: product catalog REST API with asynchronous stock updates"""
