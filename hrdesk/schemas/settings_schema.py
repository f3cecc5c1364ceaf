from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class SettingsSection(BaseModel):
    model_config = ConfigDict(extra="allow")


class CompanySettings(SettingsSection):
    name: str = Field(default="Worley Ventures", min_length=1)
    domain: str = Field(default="worleyventures.com", min_length=1)
    address: str = "123 Business Street, City, State 12345"
    phone: str = "+1 (555) 123-4567"
    email: str = "hr@worleyventures.com"
    website: str = "https://www.worleyventures.com"
    timezone: str = "America/New_York"
    currency: str = "USD"
    dateFormat: str = "MM/DD/YYYY"


class UserManagementSettings(SettingsSection):
    allowSelfRegistration: bool = False
    requireEmailVerification: bool = True
    passwordMinLength: int = Field(default=8, ge=6, le=20)
    passwordRequireSpecial: bool = True
    sessionTimeout: int = Field(default=30, ge=5, le=480)
    maxLoginAttempts: int = Field(default=5, ge=3, le=10)


class SystemSettings(SettingsSection):
    maintenanceMode: bool = False
    debugMode: bool = False
    logLevel: Literal["error", "warn", "info", "debug"] = "info"
    backupFrequency: Literal["hourly", "daily", "weekly", "monthly"] = "daily"
    dataRetention: int = Field(default=365, ge=30, le=2555)
    maxFileSize: int = Field(default=10, ge=1, le=100)


class NotificationSettings(SettingsSection):
    emailNotifications: bool = True
    smsNotifications: bool = False
    pushNotifications: bool = True
    newEmployeeAlert: bool = True
    leaveRequestAlert: bool = True
    documentExpiryAlert: bool = True
    systemMaintenanceAlert: bool = True


class SecuritySettings(SettingsSection):
    twoFactorAuth: bool = False
    ipWhitelist: List[str] = Field(default_factory=list)
    sessionTimeout: int = 30
    passwordExpiry: int = 90  # days
    accountLockoutDuration: int = 15  # minutes


class BackupSettings(SettingsSection):
    autoBackup: bool = True
    backupLocation: str = "local"
    cloudBackup: bool = False
    backupRetention: int = 30  # days
    lastBackup: Optional[datetime] = None
    nextBackup: Optional[datetime] = None


# URL segment -> (stored key, model)
SETTINGS_SECTIONS = {
    "company": ("company", CompanySettings),
    "user-management": ("userManagement", UserManagementSettings),
    "system": ("system", SystemSettings),
    "notifications": ("notifications", NotificationSettings),
    "security": ("security", SecuritySettings),
    "backup": ("backup", BackupSettings),
}


def default_settings() -> dict:
    return {key: model().model_dump() for key, model in SETTINGS_SECTIONS.values()}
