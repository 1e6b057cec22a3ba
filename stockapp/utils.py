import os
import platform
import stat
import logging

logger = logging.getLogger(__name__)

if platform.system() == "Windows":
    import win32api
    import win32con
    import win32file
    import win32security


def _set_windows_file_permissions(filepath: str) -> bool:
    """
    Replace the file's DACL with one granting access to the current user only.
    """
    try:
        current_user_name = win32api.GetUserName()
        current_user_sid, _, _ = win32security.LookupAccountName(None, current_user_name)

        dacl = win32security.ACL()
        dacl.AddAccessAllowedAce(
            win32security.ACL_REVISION,
            win32con.GENERIC_READ | win32con.GENERIC_WRITE,
            current_user_sid
        )

        file_handle = win32file.CreateFile(
            filepath,
            win32con.WRITE_DAC,
            win32file.FILE_SHARE_READ | win32file.FILE_SHARE_WRITE | win32file.FILE_SHARE_DELETE,
            None,
            win32con.OPEN_EXISTING,
            win32con.FILE_ATTRIBUTE_NORMAL,
            None
        )
        try:
            # Protected DACL: stop inheriting the profile directory's ACEs
            win32security.SetSecurityInfo(
                file_handle,
                win32security.SE_FILE_OBJECT,
                win32security.DACL_SECURITY_INFORMATION | win32security.PROTECTED_DACL_SECURITY_INFORMATION,
                None,
                None,
                dacl,
                None
            )
        finally:
            win32file.CloseHandle(file_handle)
    except win32api.error as e:
        logger.warning(f"Failed to set secure Windows file permissions for {filepath}: {e}")
        return False
    logger.debug(f"Set owner-only ACL for {filepath}")
    return True


def set_owner_only_permissions(filepath: str) -> bool:
    """
    Set file to be readable/writable by owner only.

    Returns:
        True if the permissions were applied, False if the file keeps its
        previous permissions
    """
    if platform.system() == 'Windows':
        return _set_windows_file_permissions(filepath)
    try:
        os.chmod(filepath, stat.S_IRUSR | stat.S_IWUSR)  # 600
    except OSError as e:
        logger.warning(f"Failed to set secure file permissions for {filepath}: {e}")
        return False
    return True
