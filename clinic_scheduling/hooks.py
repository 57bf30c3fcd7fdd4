app_name = "clinic_scheduling"
app_title = "Clinic Scheduling"
app_publisher = "Clinica Team"
app_description = "Agenda de clinica: dias especiales, horarios de apertura y deteccion de conflictos entre citas"
app_email = "dev@clinica.example"
app_license = "mit"

# Apps
# ------------------

required_apps = ["frappe"]

# Includes in <head>
# ------------------

# include js, css files in header of desk.html
# app_include_css = "/assets/clinic_scheduling/css/clinic_scheduling.css"
# app_include_js = "/assets/clinic_scheduling/js/clinic_scheduling.js"

# Testing
# -------

# before_tests = "clinic_scheduling.install.before_tests"

# Document Events
# ---------------
# Scheduling validation lives in the DocType controllers
# (Clinic Appointment, Group Activity, Special Day). Clinic Organization
# belongs to another app, so its opening hours are validated here.

doc_events = {
	"Clinic Organization": {
		"validate": "clinic_scheduling.clinic_scheduling.organization.validate_opening_hours"
	}
}

# Logging
# -------
# frappe.logger("clinic_scheduling") writes to logs/clinic_scheduling.log

# default_log_clearing_doctypes = {
# 	"Error Log": 30  # days to retain logs
# }
