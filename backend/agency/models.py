import enum
from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey, Enum, Text, Integer, JSON, Uuid
from sqlalchemy.orm import relationship
from datetime import datetime
import uuid
from agency.db import Base


class Role(str, enum.Enum):
    ADMIN = "ADMIN"
    AGENT = "AGENT"
    SALES = "SALES"


class ProjectType(str, enum.Enum):
    WEBSITE = "WEBSITE"
    FILM = "FILM"
    SOCIAL = "SOCIAL"


class ProjectStatus(str, enum.Enum):
    """Lifecycle stage of a website project, in order."""
    WEBTERMIN = "WEBTERMIN"
    MATERIAL = "MATERIAL"
    UMSETZUNG = "UMSETZUNG"
    DEMO = "DEMO"
    ONLINE = "ONLINE"


class ProductionStatus(str, enum.Enum):
    NONE = "NONE"
    BEENDET = "BEENDET"
    MMW = "MMW"
    VOLLST_A_K = "VOLLST_A_K"


class MaterialStatus(str, enum.Enum):
    ANGEFORDERT = "ANGEFORDERT"
    TEILWEISE = "TEILWEISE"
    VOLLSTAENDIG = "VOLLSTAENDIG"
    NV = "NV"


class WebsitePriority(str, enum.Enum):
    NONE = "NONE"
    PRIO_1 = "PRIO_1"
    PRIO_2 = "PRIO_2"
    PRIO_3 = "PRIO_3"


class SEOStatus(str, enum.Enum):
    NEIN = "NEIN"
    NEIN_NEIN = "NEIN_NEIN"
    JA_NEIN = "JA_NEIN"
    JA_JA = "JA_JA"


class TextitStatus(str, enum.Enum):
    NEIN = "NEIN"
    NEIN_NEIN = "NEIN_NEIN"
    JA_NEIN = "JA_NEIN"
    JA_JA = "JA_JA"


class FilmStatus(str, enum.Enum):
    """Derived film stage, highest precedence first."""
    BEENDET = "BEENDET"
    ONLINE = "ONLINE"
    FINALVERSION = "FINALVERSION"
    VORABVERSION = "VORABVERSION"
    SCHNITT = "SCHNITT"
    DREH = "DREH"
    SKRIPTFREIGABE = "SKRIPTFREIGABE"
    SKRIPT = "SKRIPT"
    SCOUTING = "SCOUTING"


class WebDocuDomainStatus(str, enum.Enum):
    NEW = "NEW"
    EXISTS_STAYS = "EXISTS_STAYS"
    EXISTS_TRANSFER = "EXISTS_TRANSFER"
    AT_AGENCY = "AT_AGENCY"


class WebDocuFormFieldType(str, enum.Enum):
    ANREDE = "ANREDE"
    VORNAME = "VORNAME"
    NACHNAME = "NACHNAME"
    EMAIL = "EMAIL"
    TELEFON = "TELEFON"
    STRASSE = "STRASSE"
    PLZ = "PLZ"
    ORT = "ORT"
    NACHRICHT = "NACHRICHT"
    DATENSCHUTZ = "DATENSCHUTZ"
    CUSTOM_TEXT = "CUSTOM_TEXT"
    CUSTOM_TEXTAREA = "CUSTOM_TEXTAREA"
    CUSTOM_CHECKBOX = "CUSTOM_CHECKBOX"
    CUSTOM_SELECT = "CUSTOM_SELECT"


class User(Base):
    __tablename__ = "users"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(Enum(Role), nullable=False, default=Role.AGENT)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)


class Server(Base):
    __tablename__ = "servers"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(255), nullable=False)
    ip = Column(String(64), nullable=True)
    ftp_host = Column(String(255), nullable=True)
    mysql_host = Column(String(255), nullable=True)
    froxlor_url = Column(String(500), nullable=True)
    froxlor_api_key = Column(String(255), nullable=True)
    froxlor_api_secret = Column(String(255), nullable=True)
    froxlor_version = Column(String(20), nullable=True)  # "1.x" or "2.0+"
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    clients = relationship("Client", back_populates="server")


class Client(Base):
    __tablename__ = "clients"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(255), nullable=False)
    customer_no = Column(String(50), nullable=True, index=True)
    email = Column(String(255), nullable=True)
    salutation = Column(String(50), nullable=True)
    firstname = Column(String(255), nullable=True)
    lastname = Column(String(255), nullable=True)
    phone = Column(String(100), nullable=True)
    agency = Column(String(20), nullable=True)  # "EM" | "VW"
    server_id = Column(Uuid, ForeignKey("servers.id"), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    server = relationship("Server", back_populates="clients")
    authorized_persons = relationship("AuthorizedPerson", back_populates="client", cascade="all, delete-orphan")
    projects = relationship("Project", back_populates="client", cascade="all, delete-orphan",
                            order_by="Project.created_at.desc()")
    email_logs = relationship("EmailLog", back_populates="client")


class AuthorizedPerson(Base):
    __tablename__ = "authorized_persons"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    client_id = Column(Uuid, ForeignKey("clients.id", ondelete="CASCADE"), nullable=False)
    salutation = Column(String(50), nullable=True)
    firstname = Column(String(255), nullable=False)
    lastname = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False)
    position = Column(String(255), nullable=True)
    phone = Column(String(100), nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    client = relationship("Client", back_populates="authorized_persons")


class Project(Base):
    __tablename__ = "projects"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    client_id = Column(Uuid, ForeignKey("clients.id", ondelete="CASCADE"), nullable=False)
    title = Column(String(500), nullable=True)
    type = Column(Enum(ProjectType), nullable=False, default=ProjectType.WEBSITE)
    # Last derived status, kept for sorting; the badge is always re-derived
    status = Column(Enum(ProjectStatus), nullable=False, default=ProjectStatus.WEBTERMIN)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    client = relationship("Client", back_populates="projects")
    website = relationship("ProjectWebsite", back_populates="project", uselist=False, cascade="all, delete-orphan")
    film = relationship("ProjectFilm", back_populates="project", uselist=False, cascade="all, delete-orphan")
    email_logs = relationship("EmailLog", back_populates="project")


class ProjectWebsite(Base):
    __tablename__ = "project_websites"

    project_id = Column(Uuid, ForeignKey("projects.id", ondelete="CASCADE"), primary_key=True)
    domain = Column(String(255), nullable=True)
    priority = Column(Enum(WebsitePriority), default=WebsitePriority.NONE, nullable=False)
    p_status = Column(Enum(ProductionStatus), default=ProductionStatus.NONE, nullable=False)
    material_status = Column(Enum(MaterialStatus), default=MaterialStatus.ANGEFORDERT, nullable=False)
    seo = Column(Enum(SEOStatus), nullable=True)
    textit = Column(Enum(TextitStatus), nullable=True)
    web_date = Column(DateTime, nullable=True)
    demo_date = Column(DateTime, nullable=True)
    online_date = Column(DateTime, nullable=True)
    last_material_at = Column(DateTime, nullable=True)
    notes = Column(Text, nullable=True)

    project = relationship("Project", back_populates="website")
    web_documentation = relationship(
        "WebDocumentation", back_populates="website", uselist=False, cascade="all, delete-orphan"
    )


class ProjectFilm(Base):
    __tablename__ = "project_films"

    project_id = Column(Uuid, ForeignKey("projects.id", ondelete="CASCADE"), primary_key=True)
    status = Column(String(50), nullable=True)  # production status, "BEENDET" closes the film
    contract_start = Column(DateTime, nullable=True)
    scouting = Column(DateTime, nullable=True)
    script_to_client = Column(DateTime, nullable=True)
    script_approved = Column(DateTime, nullable=True)
    shoot_date = Column(DateTime, nullable=True)
    final_to_client = Column(DateTime, nullable=True)
    online_date = Column(DateTime, nullable=True)
    online_link = Column(String(500), nullable=True)
    last_contact = Column(DateTime, nullable=True)

    project = relationship("Project", back_populates="film")
    preview_versions = relationship(
        "FilmPreviewVersion",
        back_populates="film",
        cascade="all, delete-orphan",
        order_by="FilmPreviewVersion.sent_date.desc()",
    )


class FilmPreviewVersion(Base):
    __tablename__ = "film_preview_versions"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    film_id = Column(Uuid, ForeignKey("project_films.project_id", ondelete="CASCADE"), nullable=False)
    version = Column(Integer, nullable=False, default=1)
    sent_date = Column(DateTime, nullable=False)
    link = Column(String(500), nullable=True)

    film = relationship("ProjectFilm", back_populates="preview_versions")


class WebDocumentation(Base):
    __tablename__ = "web_documentations"

    project_id = Column(Uuid, ForeignKey("project_websites.project_id", ondelete="CASCADE"), primary_key=True)

    # Step 1: Allgemeines
    contact_email = Column(String(255), nullable=True)
    urgent_notes = Column(Text, nullable=True)
    website_domain = Column(String(255), nullable=True)
    domain_status = Column(Enum(WebDocuDomainStatus), nullable=True)

    # Step 2: Unternehmensschwerpunkte
    company_name = Column(String(255), nullable=True)
    company_focus = Column(Text, nullable=True)

    # Step 4: Design & Vorgaben
    has_logo = Column(Boolean, nullable=True)
    has_ci_defined = Column(Boolean, nullable=True)
    ci_color_code = Column(String(100), nullable=True)
    ci_font_family = Column(String(255), nullable=True)
    color_orientation = Column(String(50), nullable=True)
    color_codes = Column(Text, nullable=True)
    top_website = Column(Text, nullable=True)
    flop_website = Column(Text, nullable=True)
    website_type = Column(String(50), nullable=True)
    style_types = Column(JSON, default=list)
    style_custom = Column(Text, nullable=True)
    start_area = Column(String(50), nullable=True)
    slogan = Column(Text, nullable=True)
    teaser_specs = Column(Text, nullable=True)
    disruptor_specs = Column(Text, nullable=True)
    other_specs = Column(Text, nullable=True)
    map_integration = Column(String(50), nullable=True)

    # Step 5: Formulare
    no_forms_required = Column(Boolean, default=False, nullable=False)

    # Step 6: Impressum & Datenschutz
    imprint_from_website = Column(Boolean, nullable=True)
    imprint_address = Column(Text, nullable=True)
    imprint_legal_form = Column(String(255), nullable=True)
    imprint_owner = Column(String(255), nullable=True)
    imprint_ceo = Column(String(255), nullable=True)
    imprint_phone = Column(String(100), nullable=True)
    imprint_fax = Column(String(100), nullable=True)
    imprint_email = Column(String(255), nullable=True)
    imprint_register_type = Column(String(50), nullable=True)
    imprint_register_custom = Column(String(255), nullable=True)
    imprint_register_location = Column(String(255), nullable=True)
    imprint_register_number = Column(String(100), nullable=True)
    imprint_chamber = Column(String(255), nullable=True)
    imprint_profession = Column(String(255), nullable=True)
    imprint_country = Column(String(100), nullable=True)
    imprint_vat_id = Column(String(100), nullable=True)
    imprint_terms_status = Column(String(50), nullable=True)
    imprint_privacy_officer = Column(Text, nullable=True)
    imprint_has_privacy_officer = Column(Boolean, nullable=True)

    # Step 7: Material
    material_logo_needed = Column(Boolean, nullable=True)
    material_authcode_needed = Column(Boolean, nullable=True)
    material_notes = Column(Text, nullable=True)
    material_deadline = Column(DateTime, nullable=True)

    # Customer release / confirmation / rejection
    released_at = Column(DateTime, nullable=True)
    released_by_user_id = Column(Uuid, ForeignKey("users.id"), nullable=True)
    released_by_name = Column(String(255), nullable=True)
    confirmed_at = Column(DateTime, nullable=True)
    confirmed_by_name = Column(String(255), nullable=True)
    confirmed_by_ip = Column(String(64), nullable=True)
    rejected_at = Column(DateTime, nullable=True)
    rejected_by_name = Column(String(255), nullable=True)
    rejected_by_ip = Column(String(64), nullable=True)
    rejected_steps = Column(JSON, default=list)

    internal_note = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    website = relationship("ProjectWebsite", back_populates="web_documentation")
    contacts = relationship("WebDocumentationContact", back_populates="web_documentation",
                            cascade="all, delete-orphan")
    menu_items = relationship("WebDocuMenuItem", back_populates="web_documentation",
                              cascade="all, delete-orphan", order_by="WebDocuMenuItem.sort_order")
    forms = relationship("WebDocuForm", back_populates="web_documentation",
                         cascade="all, delete-orphan", order_by="WebDocuForm.sort_order")


class WebDocumentationContact(Base):
    __tablename__ = "web_documentation_contacts"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    web_documentation_id = Column(Uuid, ForeignKey("web_documentations.project_id", ondelete="CASCADE"),
                                  nullable=False)
    authorized_person_id = Column(Uuid, ForeignKey("authorized_persons.id", ondelete="CASCADE"), nullable=False)
    is_primary = Column(Boolean, default=False, nullable=False)

    web_documentation = relationship("WebDocumentation", back_populates="contacts")
    authorized_person = relationship("AuthorizedPerson")


class WebDocuMenuItem(Base):
    __tablename__ = "web_docu_menu_items"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    web_documentation_id = Column(Uuid, ForeignKey("web_documentations.project_id", ondelete="CASCADE"),
                                  nullable=False)
    name = Column(String(255), nullable=False)
    parent_id = Column(Uuid, ForeignKey("web_docu_menu_items.id", ondelete="CASCADE"), nullable=True)
    sort_order = Column(Integer, default=0, nullable=False)
    is_footer_menu = Column(Boolean, default=False, nullable=False)
    notes = Column(Text, nullable=True)
    needs_images = Column(Boolean, default=False, nullable=False)
    needs_texts = Column(Boolean, default=False, nullable=False)
    material_notes = Column(Text, nullable=True)

    web_documentation = relationship("WebDocumentation", back_populates="menu_items")
    children = relationship("WebDocuMenuItem", cascade="all, delete-orphan",
                            order_by="WebDocuMenuItem.sort_order")


class WebDocuForm(Base):
    __tablename__ = "web_docu_forms"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    web_documentation_id = Column(Uuid, ForeignKey("web_documentations.project_id", ondelete="CASCADE"),
                                  nullable=False)
    name = Column(String(255), nullable=False)
    recipient_email = Column(String(255), nullable=True)
    sort_order = Column(Integer, default=0, nullable=False)

    web_documentation = relationship("WebDocumentation", back_populates="forms")
    fields = relationship("WebDocuFormField", back_populates="form", cascade="all, delete-orphan",
                          order_by="WebDocuFormField.sort_order")


class WebDocuFormField(Base):
    __tablename__ = "web_docu_form_fields"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    form_id = Column(Uuid, ForeignKey("web_docu_forms.id", ondelete="CASCADE"), nullable=False)
    field_type = Column(Enum(WebDocuFormFieldType), nullable=False)
    label = Column(String(255), nullable=True)
    is_required = Column(Boolean, default=False, nullable=False)
    sort_order = Column(Integer, default=0, nullable=False)

    form = relationship("WebDocuForm", back_populates="fields")


class EmailLog(Base):
    __tablename__ = "email_logs"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    project_id = Column(Uuid, ForeignKey("projects.id", ondelete="SET NULL"), nullable=True)
    client_id = Column(Uuid, ForeignKey("clients.id", ondelete="SET NULL"), nullable=True)
    to_email = Column(String(255), nullable=False)
    cc_emails = Column(Text, nullable=True)
    subject = Column(String(500), nullable=False)
    body = Column(Text, nullable=True)
    success = Column(Boolean, default=True, nullable=False)
    error = Column(Text, nullable=True)
    sent_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    project = relationship("Project", back_populates="email_logs")
    client = relationship("Client", back_populates="email_logs")
