"""Family graph package."""
from ancestree.graph.family.person import PersonOperations
from ancestree.graph.family.relationships import RelationshipOperations
from ancestree.graph.family.queries import FamilyQueries
from ancestree.graph.family.snapshot import FamilySnapshot
from ancestree.graph.family.graph import FamilyGraph

__all__ = ["PersonOperations", "RelationshipOperations", "FamilyQueries", "FamilySnapshot", "FamilyGraph"]
