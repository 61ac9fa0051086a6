"""Shared intake payloads for the readiness engine tests.

Each best-case payload answers every field at its best tier with every
gate open, so each section scores exactly 100.
"""

import copy

import pytest


STANDARD_BEST = {
    "user_type": "standard",
    "section_1_account_stakeholder": {
        "primary_poc": {"name": "Jane Smith-Parker", "email": "jane@acme.com", "role": "Legal Ops Lead"},
        "legal_poc": {"name": "Robert Chen", "email": "robert@acme.com", "timezone": "America/New_York"},
        "integrations_required": True,
        "technical_poc": {"name": "Priya Raman", "email": "priya@acme.com", "role": "IT Architect"},
        "communication_channels": ["Slack", "Email"],
        "availability": "Weekdays 9am-5pm Pacific",
    },
    "section_2_order_form_scope": {
        "purchased_modules": ["Contract Repository", "Workflows", "Integrations"],
        "additional_addons": "Advanced analytics dashboard plus a custom clause library for procurement agreements",
    },
    "section_3_template_readiness": {
        "template_count": 4,
        "templates_finalized_count": 4,
        "template_formats": ["DOCX"],
        "conditional_logic": "Simple",
        "approval_matrices_exist": "Yes",
    },
    "section_4_migration_readiness": {
        "contract_count": 500,
        "structured_naming": "100% consistent",
        "contract_formats": ["PDF", "DOCX"],
        "existing_metadata": "Fully tagged",
        "contract_types": "NDA, MSA, SOW, DPA",
    },
    "section_5_integration_readiness": {
        "systems_to_integrate": ["Salesforce", "Slack"],
        "api_webhook_access": "Yes",
        "admin_access": "Yes - all systems",
        "security_approval": "No",
        "decision_maker": {"name": "Dana Wright", "email": "dana@acme.com"},
        "expected_outcomes": ["Faster contract cycle time"],
    },
    "section_6_business_process": {
        "approval_workflow": "Documented in the legal ops runbook",
        "phase1_must_haves": "Template generation and e-signature for sales contracts",
        "bottlenecks": "Legal review queue; mitigated with clause playbooks",
        "contract_generators": ["Sales", "Procurement"],
        "workflow_details": "Two-day SLA for standard NDAs, weekly for MSAs",
    },
    "section_7_security_compliance": {
        "security_review": "Completed",
        "data_residency": "No",
        "custom_sso": "No",
        "security_reviews_needed": ["Annual penetration test"],
    },
}

PROSPECT_BEST = {
    "user_type": "prospect",
    "prospect_section_1_basics": {
        "company_name": "Acme Corporation",
        "industry": "Financial Services",
        "user_count": "100-500",
    },
    "prospect_section_2_scope_clarity": {
        "modules_interested": ["Repository", "Workflows", "Analytics"],
        "contract_templates": "Yes, all available",
        "assisted_workflows": "Yes",
        "assisted_migration": "Yes",
        "legacy_contracts": "Yes, all available",
    },
    "prospect_section_3_systems_integrations": {
        "systems_used": ["Salesforce", "DocuSign", "Slack"],
        "api_access": "Yes",
    },
    "prospect_section_4_timeline_readiness": {
        "go_live_timeline": "3-6 months",
        "biggest_concern": "Adoption by the sales organization",
        "budget_approved": "Yes",
    },
    "prospect_section_5_additional_context": {
        "internal_bottlenecks": "Legal team is understaffed this quarter",
        "compliance_deadlines": "SOX audit in Q3 2027",
        "past_clm_experience": "Used a legacy CLM for three years",
    },
}

CUSTOMER_BEST = {
    "user_type": "customer",
    "customer_section_1_stakeholders": {
        "primary_contact_name": "Maria Gonzalez",
        "primary_contact_role": "Legal Operations Lead",
        "technical_contact_name": "Kevin O'Brien",
        "technical_contact_role": "IT Systems Admin",
        "team_distribution": ["Legal", "Sales", "Procurement"],
        "decision_approver": "General Counsel",
    },
    "customer_section_2_purchased_scope": {
        "purchased_modules": ["Repository", "Workflows", "Integrations"],
        "template_count": "20-50",
        "template_readiness": "Ready",
    },
    "customer_section_3_migration": {
        "migration_needed": "Yes",
        "migration_contract_count": "1,000-5,000",
        "contract_storage": "SharePoint Online",
        "data_cleanliness": "Very clean",
    },
    "customer_section_4_integrations": {
        "integration_systems": ["Salesforce", "DocuSign", "Slack"],
        "api_access": "Yes",
        "webhooks_support": "Yes",
        "integration_owner": "IT Integration Team",
    },
    "customer_section_5_business_processes": {
        "approval_complexity": "Simple",
        "agreement_signers": "2-5",
        "process_owner": "Director of Legal Ops",
    },
    "customer_section_6_security_access": {
        "sso_required": "No",
        "security_needs": "No",
        "dpa_status": "Signed",
    },
    "customer_section_7_uploads": {
        "templates": ["nda.docx", "msa.docx", "sow.docx"],
        "sample_contracts": ["a.pdf", "b.pdf", "c.pdf", "d.pdf"],
    },
}

IM_BEST = {
    "user_type": "implementation_manager",
    "im_section_1_customer_context": {
        "customer_name": "Enterprise Corp",
        "package": "Enterprise",
        "complexity": "Low",
        "known_risks": ["Security review delays", "Legal review backlog", "Scope creep"],
    },
    "im_section_2_scope_deliverables": {
        "template_count": "5",
        "workflow_complexity": "Simple",
        "custom_development": "Yes",
        "custom_development_details": "Salesforce CPQ quote bridge",
    },
    "im_section_3_migration_details": {
        "csv_migration_required": "Yes",
        "assisted_migration": "Yes",
        "metadata_type": "Structured",
        "migration_volume": "small",
    },
    "im_section_4_integrations": {
        "integration_types": ["Salesforce", "DocuSign", "Slack"],
        "integration_engineering_effort": "Low",
        "integration_uat_rounds": "2",
        "api_access": "Yes",
    },
    "im_section_5_timeline_expectations": {
        "go_live_expectation": "8-12 weeks",
        "known_blockers": "Pending security sign-off",
        "kickoff_date": "2026-11-02",
    },
}

BEST_PAYLOADS = {
    "standard": STANDARD_BEST,
    "prospect": PROSPECT_BEST,
    "customer": CUSTOMER_BEST,
    "implementation_manager": IM_BEST,
}


@pytest.fixture
def standard_payload():
    """Best-case standard questionnaire (deep copy, safe to mutate)."""
    return copy.deepcopy(STANDARD_BEST)


@pytest.fixture
def prospect_payload():
    return copy.deepcopy(PROSPECT_BEST)


@pytest.fixture
def customer_payload():
    return copy.deepcopy(CUSTOMER_BEST)


@pytest.fixture
def im_payload():
    """Best-case implementation manager questionnaire."""
    return copy.deepcopy(IM_BEST)


@pytest.fixture
def e2e_im_payload():
    """Implementation manager intake for the high-complexity planning scenario."""
    return {
        "user_type": "implementation_manager",
        "im_section_1_customer_context": {
            "customer_name": "Globex Industries",
            "package": "Enterprise",
            "complexity": "high",
            "known_risks": ["Security review delays"],
        },
        "im_section_2_scope_deliverables": {
            "template_count": "50+",
            "workflow_complexity": "complex",
            "custom_development": "no",
        },
        "im_section_3_migration_details": {
            "csv_migration_required": "yes",
            "migration_volume": "large",
        },
        "im_section_4_integrations": {
            "integration_types": ["Salesforce", "DocuSign"],
            "api_access": "Yes",
        },
        "im_section_5_timeline_expectations": {
            "go_live_expectation": "8-12 weeks",
        },
    }


@pytest.fixture
def best_payloads():
    """Best-case payloads keyed by persona value."""
    return copy.deepcopy(BEST_PAYLOADS)
