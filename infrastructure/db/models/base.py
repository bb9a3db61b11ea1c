"""
Declarative base shared by the explore service models.
Every model imports Base from here so create_all sees the whole schema.
"""
from sqlalchemy.orm import registry

mapper_registry = registry()
Base = mapper_registry.generate_base()
