"""
Package Collection Generator — Product and target exclusion step.

Applies an input package's excludedProducts / excludedTargets to one
inspected version. Excluding names that do not exist is a no-op.
"""

from __future__ import annotations

from collectiongen.models.collection import Product, Target
from collectiongen.utils.logging import logger


def apply_exclusions(
    targets: list[Target],
    products: list[Product],
    excluded_products: list[str] | None = None,
    excluded_targets: list[str] | None = None,
) -> tuple[list[Target], list[Product]]:
    """
    Drop excluded products and targets.

    Product target lists are reduced to the targets that survive; a
    product left with no target is dropped as well.
    """
    dropped_products = set(excluded_products or [])
    dropped_targets = set(excluded_targets or [])

    kept_targets = [t for t in targets if t.name not in dropped_targets]
    declared = {t.name for t in kept_targets}

    kept_products: list[Product] = []
    for product in products:
        if product.name in dropped_products:
            continue
        product_targets = [name for name in product.targets if name in declared]
        if not product_targets:
            logger.debug("  Dropping product %s: no remaining targets", product.name)
            continue
        if len(product_targets) != len(product.targets):
            product = product.model_copy(update={"targets": product_targets})
        kept_products.append(product)

    return kept_targets, kept_products
