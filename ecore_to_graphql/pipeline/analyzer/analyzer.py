"""
Schema analyzer that transforms a metamodel resource into schema IR.

Phase 2 of the pipeline. The stages run strictly in order, each one reading
the snapshots of the previous ones:

1. Registrar: classifier skeletons, names, subclass index
2. Member mapper: fields, identifiers, containments, collection elements
3. Inheritance flattener: own + inherited fields per class
4. Collection types, root query fields and mutations
5. Assembly of the SchemaIR in print order
"""

from __future__ import annotations

import logging

from ..config import GeneratorConfig
from ..metamodel.nodes import MetamodelResource
from .inheritance import flatten_fields
from .ir_nodes import EnumDef, ObjectTypeDef, SchemaIR
from .member_mapper import MemberIndex, MemberMapper
from .mutations import synthesize_mutations
from .pagination import build_collection_types
from .registrar import ClassifierRegistrar, Registry
from .roots import build_query_type, infer_root_classes

logger = logging.getLogger(__name__)


class SchemaAnalyzer:
    """Analyzes one metamodel resource and builds the schema IR.

    An analyzer holds no state between calls; use one instance per resource
    when processing resources concurrently.
    """

    def __init__(self, config: GeneratorConfig | None = None):
        """
        Initialize the analyzer.

        Args:
            config: Generation configuration
        """
        self.config = config or GeneratorConfig()

    def analyze(self, resource: MetamodelResource) -> SchemaIR:
        """
        Analyze a resource and build the schema IR.

        Args:
            resource: The loaded metamodel

        Returns:
            SchemaIR ready for a backend

        Raises:
            EngineInvariantError: The engine's bookkeeping is inconsistent
            NameCollisionError: Classifier names collide and the policy is "error"
        """
        logger.debug("Analyzing %s", resource.name or resource.source_path)

        registry = ClassifierRegistrar(self.config).register(resource)
        members = MemberMapper(registry, self.config).map(resource)
        return self.assemble(resource, registry, members)

    def assemble(self, resource: MetamodelResource, registry: Registry, members: MemberIndex) -> SchemaIR:
        flattened = flatten_fields(registry, members)

        ir = SchemaIR(name=resource.name)
        ir.scalars = list(registry.scalars)
        ir.enums = [
            EnumDef(name=registry.name_of(e), values=list(members.enum_values.get(e, ())), description=e.documentation)
            for e in registry.enums
        ]

        for skeleton in registry.classes:
            type_def = ObjectTypeDef(
                name=skeleton.name,
                kind=skeleton.kind,
                interfaces=list(skeleton.interfaces),
                fields=list(flattened[skeleton.metaclass]),
                description=skeleton.description,
            )
            if type_def.is_interface:
                ir.interfaces.append(type_def)
            else:
                ir.objects.append(type_def)

        wrappers, page_info, subtype_enums = build_collection_types(list(members.collection_elements), registry, self.config)
        ir.wrappers = wrappers
        ir.page_info = page_info
        ir.subtype_enums = subtype_enums

        roots = infer_root_classes(registry.metaclasses, members.contained)
        ir.query = build_query_type(roots, registry)
        if ir.query is None:
            # A Mutation root requires a Query root
            logger.warning("No root class found in %s; the schema has no Query and no Mutation type", resource.name)
            return ir

        plan = synthesize_mutations(registry, members, self.config)
        ir.mutation = plan.mutation
        ir.subtype_enums.extend(plan.subtype_enums)

        return ir
