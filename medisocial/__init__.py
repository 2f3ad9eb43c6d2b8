"""MediSocial Studio: generation orchestration for medical social content."""
