"""Alert policy store, cool-downs, message formatting and the alert manager."""