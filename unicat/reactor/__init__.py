"""
The reactor groups all modules to plan & execute the updates of the locations.

The planning compares the observed & desired states, and decides which
partial updates are needed. The transactions execute them in order,
and compensate the owner changes on failures.
"""
