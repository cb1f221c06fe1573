"""madOS Bluetooth Connect - Internationalization translations.

Provides translations for English and Spanish.  Strings may contain
``str.format`` placeholders.
"""

import locale
import os

TRANSLATIONS = {
    'English': {
        'title': 'Bluetooth Device Manager',
        'bt_not_running': 'Bluetooth service is not running. Attempting to start...',
        'bt_start_failed': 'Bluetooth service could not be started',
        'found_devices': 'Found {count} configured devices',
        'available_devices': 'Available Bluetooth Devices:',
        'options': 'Options:',
        'opt_quit': 'q) Quit',
        'opt_status': 's) Show all device status',
        'select_prompt': 'Select device number or option: ',
        'goodbye': 'Goodbye!',
        'invalid_selection': 'Invalid selection. Please try again.',
        'selected': 'Selected: {label} ({address})',
        'connecting': 'Attempting to connect to {label} ({address})...',
        'connect_ok': 'Successfully connected to {label}',
        'connect_failed': 'Failed to connect to {label}',
        'press_enter': 'Press Enter to continue...',
        'recovery_title': 'Connection failed. What would you like to do?',
        'recovery_retry': '1) Try connecting again',
        'recovery_repair': '2) Remove and re-pair device',
        'recovery_status': '3) Show device status',
        'recovery_back': '4) Return to main menu',
        'recovery_prompt': 'Choose option (1-4): ',
        'repairing': 'Removing and re-pairing {label} ({address})...',
        'repair_steps': 'Removing existing pairing, scanning and pairing...',
        'pair_mode_hint': 'Make sure the device is in pairing mode',
        'pair_ok': 'Successfully paired and connected to {label}',
        'pair_partial': 'Pairing successful but connection failed',
        'pair_failed': 'Failed to pair with {label}',
        'status_for': 'Status for {label} ({address}):',
        'is_paired': '  - Device is paired',
        'not_paired': '  - Device is not paired',
        'is_connected': '  - Device is connected',
        'not_connected': '  - Device is not connected',
        'battery': '  - Battery: {battery}',
    },

    'Español': {
        'title': 'Administrador de dispositivos Bluetooth',
        'bt_not_running': 'El servicio Bluetooth no está activo. Intentando iniciarlo...',
        'bt_start_failed': 'No se pudo iniciar el servicio Bluetooth',
        'found_devices': 'Se encontraron {count} dispositivos configurados',
        'available_devices': 'Dispositivos Bluetooth disponibles:',
        'options': 'Opciones:',
        'opt_quit': 'q) Salir',
        'opt_status': 's) Ver estado de todos los dispositivos',
        'select_prompt': 'Elija un número de dispositivo u opción: ',
        'goodbye': '¡Hasta luego!',
        'invalid_selection': 'Selección no válida. Inténtelo de nuevo.',
        'selected': 'Seleccionado: {label} ({address})',
        'connecting': 'Intentando conectar con {label} ({address})...',
        'connect_ok': 'Conectado correctamente a {label}',
        'connect_failed': 'Error al conectar con {label}',
        'press_enter': 'Pulse Enter para continuar...',
        'recovery_title': 'La conexión falló. ¿Qué desea hacer?',
        'recovery_retry': '1) Intentar conectar de nuevo',
        'recovery_repair': '2) Eliminar y volver a emparejar',
        'recovery_status': '3) Ver estado del dispositivo',
        'recovery_back': '4) Volver al menú principal',
        'recovery_prompt': 'Elija una opción (1-4): ',
        'repairing': 'Eliminando y volviendo a emparejar {label} ({address})...',
        'repair_steps': 'Eliminando emparejamiento, buscando y emparejando...',
        'pair_mode_hint': 'Asegúrese de que el dispositivo esté en modo de emparejamiento',
        'pair_ok': 'Emparejado y conectado correctamente a {label}',
        'pair_partial': 'Emparejado, pero la conexión falló',
        'pair_failed': 'Error al emparejar con {label}',
        'status_for': 'Estado de {label} ({address}):',
        'is_paired': '  - El dispositivo está emparejado',
        'not_paired': '  - El dispositivo no está emparejado',
        'is_connected': '  - El dispositivo está conectado',
        'not_connected': '  - El dispositivo no está conectado',
        'battery': '  - Batería: {battery}',
    },
}


def detect_system_language():
    """Detect the system language from environment or locale.

    Returns:
        The language name matching available translations, or 'English'.
    """
    lang_code = None
    for var in ['LC_ALL', 'LC_MESSAGES', 'LANG', 'LANGUAGE']:
        lang_code = os.environ.get(var)
        if lang_code:
            break

    if not lang_code:
        try:
            lang_code = locale.getlocale()[0]
        except ValueError:
            lang_code = None

    if not lang_code:
        return 'English'

    lang_prefix = lang_code.split('_')[0].split('.')[0].lower()

    lang_map = {
        'en': 'English',
        'es': 'Español',
    }

    return lang_map.get(lang_prefix, 'English')


def get_text(key, language='English', **kwargs):
    """Retrieve a translated string for the given key and language.

    Args:
        key: The translation key to look up.
        language: The language name (default: 'English').
        **kwargs: Values for the string's format placeholders.

    Returns:
        The translated string, or the English fallback, or the key itself.
    """
    lang_dict = TRANSLATIONS.get(language, TRANSLATIONS['English'])
    text = lang_dict.get(key, TRANSLATIONS['English'].get(key, key))
    return text.format(**kwargs) if kwargs else text
