"""
Feature encoders and the preprocessing pipeline for listings.
"""
