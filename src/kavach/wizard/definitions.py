"""Built-in wizard tables: sign-in, incident report and family report."""

from __future__ import annotations

from kavach.catalog import (
    CatalogItem,
    load_branch_catalog,
    load_issue_catalog,
    load_threat_catalog,
)
from kavach.wizard.steps import (
    BranchContent,
    ExactLength,
    FieldSpec,
    MustBeTrue,
    StepDefinition,
    WizardDefinition,
)

OTP_LENGTH = 6
EMERGENCY_HOTLINE = "1800-XXX-XXXX"

INCIDENT_URGENCY = (
    CatalogItem("low", "Low", "Can be addressed in routine course"),
    CatalogItem("medium", "Medium", "Needs attention within a few days"),
    CatalogItem("high", "High", "Needs attention today"),
    CatalogItem("critical", "Critical", "Ongoing compromise or immediate risk"),
)

FAMILY_URGENCY = (
    CatalogItem("emergency", "Emergency - I need help right now", "I'm in immediate danger or someone is threatening me"),
    CatalogItem("soon", "Soon - I need help today", "This is worrying me and I'd like help as soon as possible"),
    CatalogItem("normal", "Normal - I can wait a few days", "I want to report this but it's not urgent"),
)


def build_auth_wizard() -> WizardDefinition:
    branches, warning = load_branch_catalog()
    steps = (
        StepDefinition(
            position=1,
            title="Branch & ID Verification",
            description="Select your service branch and enter your service number.",
            fields=(
                FieldSpec("branch", kind="choice", label="Service branch", required=True, choices=tuple(branches)),
                FieldSpec("serviceNumber", label="Service number", required=True),
            ),
        ),
        StepDefinition(
            position=2,
            title="Contact Information",
            description="We send a one-time password to your registered contact.",
            fields=(
                FieldSpec("email", label="Official email", required=True),
                FieldSpec("phone", label="Mobile number", required=True),
            ),
        ),
        StepDefinition(
            position=3,
            title="OTP Verification",
            description=f"Enter the {OTP_LENGTH}-digit code sent to your phone and email.",
            fields=(FieldSpec("otp", label="One-time password", required=True),),
            rules=(ExactLength("otp", OTP_LENGTH),),
        ),
        StepDefinition(
            position=4,
            title="Security Verification",
            description="Answer your security question. Biometric sign-in is optional.",
            fields=(
                FieldSpec("securityAnswer", label="Security answer", required=True),
                FieldSpec("biometricEnabled", kind="flag", label="Enable biometric sign-in"),
            ),
        ),
        StepDefinition(
            position=5,
            title="Authentication Complete",
            description="Your identity has been verified. Continue to your dashboard.",
        ),
    )
    return WizardDefinition(
        kind="auth",
        title="Secure Authentication",
        steps=steps,
        id_prefix="AUTH",
        notes=_notes(warning),
    )


def build_incident_wizard() -> WizardDefinition:
    threats, warning = load_threat_catalog()
    steps = (
        StepDefinition(
            position=1,
            title="Select Threat Type",
            description="What kind of cyber threat are you reporting?",
            fields=(FieldSpec("threatType", kind="choice", label="Threat type", required=True, choices=tuple(threats)),),
        ),
        StepDefinition(
            position=2,
            title="Incident Details",
            description="Describe what happened and how urgent it is.",
            fields=(
                FieldSpec("description", label="Description", required=True),
                FieldSpec("urgency", kind="choice", label="Urgency", required=True, choices=INCIDENT_URGENCY),
                FieldSpec("dateTime", label="Date and time", hint="When did it happen?"),
                FieldSpec("location", label="Location", hint="Unit, station or platform"),
            ),
        ),
        StepDefinition(
            position=3,
            title="Upload Evidence",
            description="Attach screenshots, recordings or documents. Analysis starts automatically.",
            fields=(FieldSpec("evidence", kind="evidence", label="Evidence files", hint="Paths to files, comma separated"),),
        ),
        StepDefinition(
            position=4,
            title="Review & Submit",
            description="Add anything else we should know and confirm consent to be contacted.",
            fields=(
                FieldSpec("additionalInfo", label="Additional information"),
                FieldSpec("contactConsent", kind="flag", label="I agree to be contacted about this report"),
            ),
            rules=(MustBeTrue("contactConsent"),),
        ),
    )
    return WizardDefinition(
        kind="incident",
        title="Report Cyber Incident",
        steps=steps,
        id_prefix="RPT",
        evidence_field="evidence",
        notes=_notes(warning),
    )


def build_family_wizard() -> WizardDefinition:
    issues, warning = load_issue_catalog()
    help_branches = tuple(
        BranchContent("issueType", item.value, item.name, item.extra["help"])
        for item in issues
        if item.extra.get("help")
    )
    hotline = BranchContent(
        "urgency",
        "emergency",
        "Emergency Support",
        f"If you're in immediate danger, please call our emergency hotline: {EMERGENCY_HOTLINE}",
    )
    steps = (
        StepDefinition(
            position=1,
            title="What happened?",
            description="Pick the option that best matches your concern.",
            fields=(FieldSpec("issueType", kind="choice", label="Issue type", required=True, choices=tuple(issues)),),
        ),
        StepDefinition(
            position=2,
            title="Tell us more",
            description="Describe what happened in your own words.",
            fields=(
                FieldSpec("description", label="What happened", required=True),
                FieldSpec("whenHappened", label="When did this happen?", required=True, hint="Yesterday evening, last week..."),
            ),
            branches=help_branches,
        ),
        StepDefinition(
            position=3,
            title="How can we help?",
            description="Tell us how urgent this is and what help you need.",
            fields=(
                FieldSpec("urgency", kind="choice", label="How urgent is this?", required=True, choices=FAMILY_URGENCY),
                FieldSpec("needsHelp", label="What kind of help do you need?", required=True),
            ),
            branches=(hotline,),
        ),
        StepDefinition(
            position=4,
            title="Almost done",
            description="We'll only use this to help you with your report.",
            fields=(FieldSpec("contactInfo", label="Phone number or email", required=True),),
        ),
    )
    return WizardDefinition(
        kind="family",
        title="Get Help",
        steps=steps,
        id_prefix="FAM",
        notes=_notes(warning),
    )


def build_builtin_wizards() -> list[WizardDefinition]:
    return [build_auth_wizard(), build_incident_wizard(), build_family_wizard()]


def _notes(warning: str | None) -> tuple[str, ...]:
    return (warning,) if warning else ()
