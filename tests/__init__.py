"""Test suite package marker to ensure deterministic module names."""

# Package semantics keep same-named modules in nested directories (for
# example ``tests.layout.test_bar`` and ``tests.property.test_bar``) from
# shadowing each other during collection.
