"""Catalog Service middleware"""
