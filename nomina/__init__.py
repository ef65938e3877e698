"""
nomina: referential-integrity and hierarchy-validation core for
Organization -> Payroll -> {Division, Job} resources.
"""
