"""EduPortal backend: profile, notes and welcome-email API."""
