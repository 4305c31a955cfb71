"""Shared helpers: protocol constants, time and request-state utilities"""
