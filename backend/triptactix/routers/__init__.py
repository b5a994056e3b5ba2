"""TripTactix API Routers"""
