"""
The SOLVERS layer advances temperature fields in time.
It knows the discretization and the linear algebra, nothing about plotting.
"""
