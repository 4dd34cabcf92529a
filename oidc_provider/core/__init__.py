"""Core configuration, key algorithms and key management"""
