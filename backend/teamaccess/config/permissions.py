"""
Permission registry: single source of truth for all permission keys, labels,
display groups and per-role defaults.

Keys are stored as column names on ``user_permissions`` and as JSON keys on
``permission_templates``. Never rename a key; only append new ones.
"""
from typing import Dict, List, Optional

ALL_PERMISSIONS = {
    # Atendimento
    "can_view_chat":           {"label": "Chat",            "description": "Acessar o chat de conversas",   "category": "Atendimento"},
    "can_view_chatbots":       {"label": "Chatbots",        "description": "Gerenciar chatbots",            "category": "Atendimento"},
    "can_view_flows":          {"label": "Fluxos",          "description": "Editor de fluxos",              "category": "Atendimento"},
    "can_view_departments":    {"label": "Departamentos",   "description": "Gerenciar departamentos",       "category": "Atendimento"},
    "can_view_schedules":      {"label": "Agendamentos",    "description": "Mensagens agendadas",           "category": "Atendimento"},
    "can_view_tags":           {"label": "Tags",            "description": "Gerenciar tags",                "category": "Atendimento"},
    "can_view_contacts":       {"label": "Contatos",        "description": "Lista de contatos",             "category": "Atendimento"},
    "can_view_ai_secretary":   {"label": "Secretária IA",   "description": "Secretária de grupos",          "category": "Atendimento"},
    "can_view_ai_agents":      {"label": "Agentes IA",      "description": "Configurar agentes IA",         "category": "Atendimento"},

    # CRM
    "can_view_crm":            {"label": "Negociações",     "description": "Kanban de negociações",         "category": "CRM"},
    "can_view_prospects":      {"label": "Prospects",       "description": "Gestão de prospects",           "category": "CRM"},
    "can_view_companies":      {"label": "Empresas",        "description": "Cadastro de empresas",          "category": "CRM"},
    "can_view_map":            {"label": "Mapa",            "description": "Visualização em mapa",          "category": "CRM"},
    "can_view_calendar":       {"label": "Agenda",          "description": "Agenda do CRM",                 "category": "CRM"},
    "can_view_tasks":          {"label": "Tarefas",         "description": "Gestão de tarefas",             "category": "CRM"},
    "can_view_reports":        {"label": "Relatórios",      "description": "Relatórios do CRM",             "category": "CRM"},
    "can_view_revenue_intel":  {"label": "Revenue Intel",   "description": "Inteligência de receita",       "category": "CRM"},
    "can_view_ghost":          {"label": "Modo Fantasma",   "description": "Auditoria e análise",           "category": "CRM"},
    "can_view_crm_settings":   {"label": "Config. CRM",     "description": "Configurações do CRM",          "category": "CRM"},

    # Projetos
    "can_view_projects":       {"label": "Projetos",        "description": "Kanban de projetos",            "category": "Projetos"},

    # Disparos
    "can_view_campaigns":      {"label": "Campanhas",       "description": "Listas, mensagens e campanhas", "category": "Disparos"},
    "can_view_sequences":      {"label": "Sequências",      "description": "Sequências de nurturing",       "category": "Disparos"},
    "can_view_external_flows": {"label": "Fluxos Externos", "description": "Formulários e fluxos externos", "category": "Disparos"},
    "can_view_webhooks":       {"label": "Webhooks",        "description": "Webhooks de leads",             "category": "Disparos"},
    "can_view_ctwa":           {"label": "CTWA Analytics",  "description": "Click to WhatsApp analytics",   "category": "Disparos"},

    # Administração
    "can_view_settings":       {"label": "Ajustes",         "description": "Configurações pessoais",        "category": "Administração"},
    "can_view_billing":        {"label": "Cobrança",        "description": "Gestão de cobranças",           "category": "Administração"},
    "can_view_connections":    {"label": "Conexões",        "description": "Gerenciar conexões WhatsApp",   "category": "Administração"},
    "can_view_organizations":  {"label": "Organizações",    "description": "Gerenciar organização",         "category": "Administração"},

    # Comunicação Interna
    "can_view_internal_chat":  {"label": "Chat Interno",    "description": "Comunicação entre equipe",      "category": "Comunicação Interna"},
}

PERMISSION_KEYS = tuple(ALL_PERMISSIONS)

# Display groups, in catalog order
PERMISSION_GROUPS: List[str] = list(dict.fromkeys(info["category"] for info in ALL_PERMISSIONS.values()))

ROLES = ("owner", "admin", "manager", "agent")
FALLBACK_ROLE = "agent"

# Roles allowed to change another member's overrides
PERMISSION_MANAGER_ROLES = ("owner", "admin")
# Roles allowed to create, edit and delete templates
TEMPLATE_MANAGER_ROLES = ("owner",)

DEFAULT_TEMPLATE_ICON = "Users"

# Defaults: role -> set of granted permission keys
DEFAULT_PERMISSIONS = {
    "owner": set(PERMISSION_KEYS),
    "admin": set(PERMISSION_KEYS),
    "manager": {
        "can_view_chat", "can_view_schedules", "can_view_tags", "can_view_contacts",
        "can_view_crm", "can_view_prospects", "can_view_companies", "can_view_map",
        "can_view_calendar", "can_view_tasks", "can_view_reports",
        "can_view_projects",
        "can_view_settings", "can_view_internal_chat",
    },
    "agent": {
        "can_view_chat", "can_view_schedules", "can_view_tags", "can_view_contacts",
        "can_view_crm", "can_view_prospects",
        "can_view_calendar", "can_view_tasks",
        "can_view_settings", "can_view_internal_chat",
    },
}

# Global templates inserted by seed_permission_templates.py
DEFAULT_TEMPLATES = [
    {
        "name": "Vendedor",
        "description": "Atendimento e CRM básico, sem acesso administrativo",
        "icon": "Briefcase",
        "permissions": DEFAULT_PERMISSIONS["agent"] | {"can_view_companies"},
    },
    {
        "name": "Supervisor",
        "description": "Acompanha a equipe: relatórios, mapa e projetos",
        "icon": "UserCheck",
        "permissions": DEFAULT_PERMISSIONS["manager"] | {"can_view_campaigns"},
    },
    {
        "name": "Gerente",
        "description": "Acesso completo exceto cobrança e organizações",
        "icon": "Crown",
        "permissions": set(PERMISSION_KEYS) - {"can_view_billing", "can_view_organizations"},
    },
]


def zero_vector() -> Dict[str, bool]:
    """Every catalog key set to False."""
    return {key: False for key in PERMISSION_KEYS}


def full_vector() -> Dict[str, bool]:
    """Every catalog key set to True."""
    return {key: True for key in PERMISSION_KEYS}


def merge_onto_zero(partial: Optional[Dict[str, Optional[bool]]]) -> Dict[str, bool]:
    """Left-merge a stored partial vector onto the all-False vector.

    Unknown keys are dropped and ``None`` values resolve to False.
    """
    vector = zero_vector()
    for key, value in (partial or {}).items():
        if key in vector:
            vector[key] = bool(value)
    return vector


def role_defaults(role: Optional[str]) -> Dict[str, bool]:
    """Return the default vector for a role, falling back to agent defaults."""
    granted = DEFAULT_PERMISSIONS.get(role or "", DEFAULT_PERMISSIONS[FALLBACK_ROLE])
    return {key: key in granted for key in PERMISSION_KEYS}
