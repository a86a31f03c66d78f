"""Numeric process exit codes.

Every fatal condition (bad arguments, invalid target, wrong output type,
unreadable or unparsable input, structural document error) terminates the
run with :data:`EXIT_GENERIC_FAILURE`, matching the behaviour CI scripts
around the ``add-examples`` job rely on.

Example::

    $ specsamples spec.yaml result.yaml
    Error: Only JSON format is supported for output (got 'result.yaml').
    $ echo $?
    1
"""

EXIT_SUCCESS = 0
"""The samples were generated and written."""

EXIT_GENERIC_FAILURE = 1
"""Any fatal condition; nothing was written."""

EXIT_CANCELLED = 130
"""The run was interrupted with Ctrl-C."""
