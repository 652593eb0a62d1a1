"""Customer risk scoring and approval workflow"""
