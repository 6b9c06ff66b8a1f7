from pydantic import BaseModel, EmailStr, Field, ConfigDict, field_validator
from typing import Optional, List, Dict, Any
from datetime import datetime
from uuid import UUID
from agency.models import (
    Role,
    ProjectType,
    ProductionStatus,
    MaterialStatus,
    WebsitePriority,
    SEOStatus,
    TextitStatus,
    WebDocuDomainStatus,
    WebDocuFormFieldType,
)


# ============= Auth Schemas =============
class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    email: EmailStr
    role: Role
    is_active: bool


# ============= Status Schemas =============
class StatusBadgeResponse(BaseModel):
    status: str
    label: str
    since: Optional[datetime] = None
    since_display: str = "-"


# ============= Client Schemas =============
class ServerBrief(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str


class AuthorizedPersonCreate(BaseModel):
    salutation: Optional[str] = None
    firstname: str = Field(..., min_length=1, max_length=255)
    lastname: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    position: Optional[str] = None
    phone: Optional[str] = None
    notes: Optional[str] = None


class AuthorizedPersonUpdate(BaseModel):
    salutation: Optional[str] = None
    firstname: Optional[str] = Field(None, min_length=1, max_length=255)
    lastname: Optional[str] = Field(None, min_length=1, max_length=255)
    email: Optional[EmailStr] = None
    position: Optional[str] = None
    phone: Optional[str] = None
    notes: Optional[str] = None


class AuthorizedPersonResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    client_id: UUID
    salutation: Optional[str] = None
    firstname: str
    lastname: str
    email: str
    position: Optional[str] = None
    phone: Optional[str] = None
    notes: Optional[str] = None


class ClientResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    customer_no: Optional[str] = None
    email: Optional[str] = None
    firstname: Optional[str] = None
    lastname: Optional[str] = None
    agency: Optional[str] = None
    server_id: Optional[UUID] = None
    is_active: bool


class ProjectSummary(BaseModel):
    id: UUID
    client_id: UUID
    title: Optional[str] = None
    display_name: str
    type: ProjectType
    status: StatusBadgeResponse
    domain: Optional[str] = None


class ClientDetailResponse(ClientResponse):
    server: Optional[ServerBrief] = None
    froxlor_customer: Optional[Dict[str, Any]] = None
    froxlor_domains: List[Dict[str, Any]] = []
    authorized_persons: List[AuthorizedPersonResponse] = []
    projects: List[ProjectSummary] = []


class FtpAccountInfo(BaseModel):
    id: Optional[int] = None
    username: str
    homedir: Optional[str] = None
    description: Optional[str] = None
    login_enabled: bool = True
    last_login: Optional[str] = None


class DatabaseInfo(BaseModel):
    id: Optional[int] = None
    database_name: str
    description: Optional[str] = None


class HostingCredentialsResponse(BaseModel):
    server_name: str
    ftp_host: Optional[str] = None
    mysql_host: Optional[str] = None
    customer_login: Optional[str] = None
    ftp_accounts: List[FtpAccountInfo] = []
    databases: List[DatabaseInfo] = []


class FtpPasswordUpdate(BaseModel):
    ftp_id: int
    password: str = Field(..., min_length=8, max_length=128)


class DomainAssignment(BaseModel):
    project_id: UUID
    domain: str = Field(..., min_length=3, max_length=255)


class EmailLogResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    project_id: Optional[UUID] = None
    client_id: Optional[UUID] = None
    to_email: str
    cc_emails: Optional[str] = None
    subject: str
    success: bool
    error: Optional[str] = None
    sent_at: datetime


# ============= Project Schemas =============
class WebsiteData(BaseModel):
    domain: Optional[str] = None
    priority: Optional[WebsitePriority] = None
    p_status: Optional[ProductionStatus] = None
    material_status: Optional[MaterialStatus] = None
    seo: Optional[SEOStatus] = None
    textit: Optional[TextitStatus] = None
    web_date: Optional[datetime] = None
    demo_date: Optional[datetime] = None
    online_date: Optional[datetime] = None
    last_material_at: Optional[datetime] = None
    notes: Optional[str] = None


class FilmData(BaseModel):
    status: Optional[str] = None
    contract_start: Optional[datetime] = None
    scouting: Optional[datetime] = None
    script_to_client: Optional[datetime] = None
    script_approved: Optional[datetime] = None
    shoot_date: Optional[datetime] = None
    final_to_client: Optional[datetime] = None
    online_date: Optional[datetime] = None
    online_link: Optional[str] = None
    last_contact: Optional[datetime] = None


class ProjectCreate(BaseModel):
    client_id: UUID
    title: Optional[str] = Field(None, max_length=500)
    type: ProjectType = ProjectType.WEBSITE
    website: Optional[WebsiteData] = None
    film: Optional[FilmData] = None


class PreviewVersionCreate(BaseModel):
    sent_date: datetime
    link: Optional[str] = None


class WebsiteResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    domain: Optional[str] = None
    priority: WebsitePriority
    priority_label: str = "-"
    p_status: ProductionStatus
    p_status_label: str = "-"
    material_status: MaterialStatus
    material_status_label: str = "-"
    seo: Optional[SEOStatus] = None
    seo_label: str = "-"
    textit: Optional[TextitStatus] = None
    textit_label: str = "-"
    web_date: Optional[datetime] = None
    demo_date: Optional[datetime] = None
    online_date: Optional[datetime] = None
    last_material_at: Optional[datetime] = None
    has_web_documentation: bool = False


class PreviewVersionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    version: int
    sent_date: datetime
    link: Optional[str] = None


class FilmResponse(FilmData):
    model_config = ConfigDict(from_attributes=True)

    preview_versions: List[PreviewVersionResponse] = []


class ProjectDetail(ProjectSummary):
    client_name: str
    website: Optional[WebsiteResponse] = None
    film: Optional[FilmResponse] = None
    created_at: datetime
    updated_at: datetime


# ============= Web Documentation Schemas =============
class WebDocuStep1Update(BaseModel):
    contact_email: Optional[str] = None
    urgent_notes: Optional[str] = None
    website_domain: Optional[str] = None
    domain_status: Optional[WebDocuDomainStatus] = None


class WebDocuStep2Update(BaseModel):
    company_name: Optional[str] = None
    company_focus: Optional[str] = None


class WebDocuStep4Update(BaseModel):
    has_logo: Optional[bool] = None
    has_ci_defined: Optional[bool] = None
    ci_color_code: Optional[str] = None
    ci_font_family: Optional[str] = None
    color_orientation: Optional[str] = None
    color_codes: Optional[str] = None
    top_website: Optional[str] = None
    flop_website: Optional[str] = None
    website_type: Optional[str] = None
    style_types: List[str] = []
    style_custom: Optional[str] = None
    start_area: Optional[str] = None
    slogan: Optional[str] = None
    teaser_specs: Optional[str] = None
    disruptor_specs: Optional[str] = None
    other_specs: Optional[str] = None
    map_integration: Optional[str] = None


class WebDocuStep6Update(BaseModel):
    imprint_from_website: Optional[bool] = None
    imprint_address: Optional[str] = None
    imprint_legal_form: Optional[str] = None
    imprint_owner: Optional[str] = None
    imprint_ceo: Optional[str] = None
    imprint_phone: Optional[str] = None
    imprint_fax: Optional[str] = None
    imprint_email: Optional[str] = None
    imprint_register_type: Optional[str] = None
    imprint_register_custom: Optional[str] = None
    imprint_register_location: Optional[str] = None
    imprint_register_number: Optional[str] = None
    imprint_chamber: Optional[str] = None
    imprint_profession: Optional[str] = None
    imprint_country: Optional[str] = None
    imprint_vat_id: Optional[str] = None
    imprint_terms_status: Optional[str] = None
    imprint_privacy_officer: Optional[str] = None
    imprint_has_privacy_officer: Optional[bool] = None


class WebDocuStep7Update(BaseModel):
    material_logo_needed: Optional[bool] = None
    material_authcode_needed: Optional[bool] = None
    material_notes: Optional[str] = None
    material_deadline: Optional[str] = None  # date input, stored without timezone shift


class WebDocuContactAdd(BaseModel):
    authorized_person_id: UUID
    is_primary: bool = False


class WebDocuContactCreate(AuthorizedPersonCreate):
    is_primary: bool = False


class MenuItemCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    parent_id: Optional[UUID] = None
    is_footer_menu: bool = False


class MenuItemUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    is_footer_menu: Optional[bool] = None
    notes: Optional[str] = None


class MenuItemOrder(BaseModel):
    id: UUID
    parent_id: Optional[UUID] = None
    sort_order: int


class MenuItemMaterial(BaseModel):
    id: UUID
    needs_images: bool = False
    needs_texts: bool = False
    material_notes: Optional[str] = None


class NoFormsRequiredUpdate(BaseModel):
    no_forms_required: bool


class FormCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    recipient_email: Optional[str] = None


class FormUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    recipient_email: Optional[str] = None


class FormFieldSpec(BaseModel):
    field_type: WebDocuFormFieldType
    label: Optional[str] = None
    is_required: bool = False
    enabled: bool = True


class FormFieldsUpdate(BaseModel):
    fields: List[FormFieldSpec]

    @field_validator("fields")
    @classmethod
    def _unique_field_types(cls, value: List[FormFieldSpec]) -> List[FormFieldSpec]:
        seen = set()
        for choice in value:
            if choice.field_type in seen:
                raise ValueError(f"Feldtyp {choice.field_type.value} ist mehrfach angegeben")
            seen.add(choice.field_type)
        return value


class ContactResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    is_primary: bool
    authorized_person: AuthorizedPersonResponse


class MenuItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    parent_id: Optional[UUID] = None
    sort_order: int
    is_footer_menu: bool
    notes: Optional[str] = None
    needs_images: bool
    needs_texts: bool
    material_notes: Optional[str] = None


class FormFieldResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    field_type: WebDocuFormFieldType
    label: Optional[str] = None
    is_required: bool
    sort_order: int


class FormResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    recipient_email: Optional[str] = None
    sort_order: int
    fields: List[FormFieldResponse] = []


class StepGateResponse(BaseModel):
    allowed: bool
    reason: Optional[str] = None
    form_ids: List[str] = []


class WizardStepResponse(BaseModel):
    number: int
    title: str
    short_title: str
    saved: bool
    enabled: bool
    can_advance: StepGateResponse


class WizardStateResponse(BaseModel):
    locked: bool
    steps: List[WizardStepResponse]


class WebDocumentationResponse(WebDocuStep1Update, WebDocuStep2Update, WebDocuStep4Update, WebDocuStep6Update):
    model_config = ConfigDict(from_attributes=True)

    project_id: UUID
    no_forms_required: bool
    material_logo_needed: Optional[bool] = None
    material_authcode_needed: Optional[bool] = None
    material_notes: Optional[str] = None
    material_deadline: Optional[datetime] = None
    released_at: Optional[datetime] = None
    released_by_name: Optional[str] = None
    confirmed_at: Optional[datetime] = None
    confirmed_by_name: Optional[str] = None
    rejected_at: Optional[datetime] = None
    rejected_by_name: Optional[str] = None
    rejected_steps: List[int] = []
    internal_note: Optional[str] = None
    contacts: List[ContactResponse] = []
    menu_items: List[MenuItemResponse] = []
    forms: List[FormResponse] = []
    wizard: Optional[WizardStateResponse] = None

    @field_validator("style_types", "rejected_steps", mode="before")
    @classmethod
    def _none_as_empty(cls, value):
        return value or []


class ReleaseResponse(BaseModel):
    released_at: Optional[datetime] = None
    released_by_name: Optional[str] = None
