"""Interactive onboarding for skillscout."""

from skillscout.cli.onboarding.wizard import OnboardingWizard

__all__ = ["OnboardingWizard"]
