"""
Grammars built with combparse.

- `numeric`: fractions, signed integers, floats or fractions.
- `semver`: semantic versions and their precedence.
- `ini`: INI style configuration documents.
"""

import combparse.grammars.numeric as numeric
import combparse.grammars.semver as semver
import combparse.grammars.ini as ini
