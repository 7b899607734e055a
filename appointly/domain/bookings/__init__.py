"""Bookings domain - booking lifecycle, slot checks and queries"""
