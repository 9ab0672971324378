"""
Field-level data protection for personnel records.

Decides per field and per caller whether a value is shown, masked or
withheld, writes a synchronous access log for every sensitive read, and
runs the time-boxed unmask request workflow.

Entry point for consumers is services.FieldSecurityService.
"""
