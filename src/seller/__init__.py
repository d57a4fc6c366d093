"""Seller catalog overlay: which species and cuts a processor offers."""
