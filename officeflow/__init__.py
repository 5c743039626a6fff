"""officeflow: office task assignment, billing approval, and activity feed service."""
