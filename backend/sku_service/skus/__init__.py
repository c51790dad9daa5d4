"""SKU API: schemas, service and router"""
