"""Domain layer - scoring, portfolio metrics and approval workflow"""
