"""Infrastructure adapters - customer store, alert sink, observability"""
