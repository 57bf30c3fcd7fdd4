"""
Clients Module

Phone identity helpers used to match clients across stored phone formats.
"""
