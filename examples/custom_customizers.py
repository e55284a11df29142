#!/usr/bin/env python3
"""
Example custom customizers for roundtripfuzz.

This file shows how to add type-specific generation overrides without
changing the package. Each customizer is a function that takes:
  - value: the zero value of the type being generated
  - gen: the Generator, which exposes get_int(), get_bool(), get_string(),
         get_string_from(), generate() and generate_struct()

To use these customizers:
  python -m roundtripfuzz --customizers examples/custom_customizers.py

Customizers registered here replace the defaults for the same type.
"""

from roundtripfuzz.api import OwnerReference, StatusCause
from roundtripfuzz.labels import random_dns_label


# Use the decorator to register customizers
# (registry and register_customizer are injected by roundtripfuzz when loading)

@register_customizer(OwnerReference)
def fuzz_owner_reference(ref: OwnerReference, gen) -> OwnerReference:
    """Owner references that name a real-looking owner.

    The kind is one of a few workload kinds and the name is a DNS label.
    """
    gen.generate_struct(ref)
    kinds = ["Deployment", "ReplicaSet", "StatefulSet", "Job"]
    ref.kind = kinds[gen.get_int() % len(kinds)]
    ref.api_version = "apps/v1"
    ref.name = random_dns_label(gen)
    return ref


@register_customizer(StatusCause)
def fuzz_status_cause(cause: StatusCause, gen) -> StatusCause:
    """Status causes whose field path looks like spec.containers[N].image."""
    index = gen.get_int() % 8
    cause.type = "FieldValueInvalid"
    cause.message = gen.get_string(40)
    cause.field_path = f"spec.containers[{index}].image"
    return cause
