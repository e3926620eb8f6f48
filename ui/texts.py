APP_TITLE = "Production Planning Data"

# Section titles
SEC_PRODUCTS = "Products"
SEC_RESOURCES = "Resources"
SEC_CONSUMPTION = "Consumption (resource x product)"

# Buttons
BTN_SAVE = "Save all"
BTN_RELOAD = "Reload"
BTN_DOWNLOAD_EXCEL = "Download Excel"

# Guidance
MSG_SAVED = "Data saved"
MSG_CONSUMPTION_HINT = "Leave a cell empty when the product does not use the resource."
MSG_NEED_ROWS = "Add at least one product and one resource to enter consumption."
MSG_EXPORT_FAILED = "Excel export could not be downloaded."

# Validation
ERR_ID_REQUIRED = "Every row needs an id."
ERR_DUPLICATE_ID = "Ids must be unique within a table."
ERR_LOAD = "Data could not be loaded"
ERR_SAVE = "Data could not be saved"
