class UIKeys:
    """Keys for UI widgets in ``st.session_state``."""

    MODE_SELECT = "ui.order.mode"
    RESCHEDULE_ROW = "ui.order.reschedule_row"
    COMPANY_SELECT = "ui.order.company"
    PACKAGE_SELECT = "ui.order.package"
    REASON_SELECT = "ui.order.order_reason"
    DOT_AGENCY_SELECT = "ui.order.dot_agency"
    SEND_LINK_TOGGLE = "ui.order.send_link"
    DONOR_PASS_TOGGLE = "ui.order.donor_pass"
    COMPANY_CC_INPUT = "ui.order.company_cc"
    AGENCY_CC_INPUT = "ui.order.agency_cc"
    ZIP_SEARCH_INPUT = "ui.order.zip_search"
    SITE_SELECT = "ui.order.site"
    ATTACHMENT_UPLOADER = "ui.order.attachment"


class StateKeys:
    """Keys for data stored in ``st.session_state``."""

    AUTH_TOKEN = "auth.token"
    ACTIVE_WIZARD_ID = "order.active_wizard_id"
    LAST_RESULT_ID = "order.last_result_id"
    LAST_RESULT_MODE = "order.last_result_mode"
